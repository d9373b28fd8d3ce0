"""Tests for dependency graph building and the used-bindings table."""
from pathlib import Path

from component_extractor.analyzer.graph_builder import DependencyGraphBuilder


def build(project, *entries):
    return DependencyGraphBuilder(project).build_graph(list(entries))


class TestDependencySet:
    """Which files end up in the extraction."""

    def test_login_scenario(self, make_project):
        project = make_project({
            'src/pages/Login.jsx': """
                import React from 'react';
                import { validateEmail } from '../utils/validation';
                export default function Login() {
                  return validateEmail('a@b.c') ? <div /> : null;
                }
            """,
            'src/utils/validation.js': """
                export function validateEmail(s) { return s.includes('@'); }
                export function validatePassword(s) { return s.length > 7; }
            """,
        })

        graph = build(project, 'src/pages/Login.jsx')

        assert graph.files == ['src/pages/Login.jsx', 'src/utils/validation.js']
        assert graph.used_bindings['src/utils/validation.js'] == {'validateEmail'}
        assert 'src/pages/Login.jsx' not in graph.used_bindings

    def test_external_packages_have_no_edge(self, make_project):
        project = make_project({
            'src/App.jsx': """
                import React from 'react';
                import axios from 'axios';
                export const App = () => axios;
            """,
        })

        graph = build(project, 'src/App.jsx')

        assert graph.files == ['src/App.jsx']
        assert graph.graph.number_of_edges() == 0

    def test_cycle_visits_each_module_once(self, make_project):
        project = make_project({
            'src/a.js': "import { b } from './b';\nexport const a = () => b();\n",
            'src/b.js': "import { a } from './a';\nexport const b = () => a();\n",
        })

        graph = build(project, 'src/a.js')

        assert graph.files == ['src/a.js', 'src/b.js']
        assert graph.used_bindings['src/b.js'] == {'b'}
        assert graph.used_bindings['src/a.js'] == {'a'}
        assert graph.cycles() == [['src/a.js', 'src/b.js']]

    def test_stylesheet_is_included_but_not_parsed(self, make_project):
        project = make_project({
            'src/Card.jsx': "import './Card.css';\nexport const Card = () => null;\n",
            'src/Card.css': ".card { color: red; }\n",
        })

        graph = build(project, 'src/Card.jsx')

        assert graph.files == ['src/Card.jsx', 'src/Card.css']
        assert graph.used_bindings['src/Card.css'] == set()
        assert 'src/Card.css' not in graph.exports

    def test_unresolvable_relative_import_is_skipped(self, make_project):
        project = make_project({
            'src/App.jsx': "import { Gone } from './Gone';\nexport const App = () => Gone;\n",
        })

        graph = build(project, 'src/App.jsx')

        assert graph.files == ['src/App.jsx']

    def test_bare_specifier_under_source_root(self, make_project):
        project = make_project({
            'src/App.jsx': "import { format } from 'utils/format';\nexport const App = () => format();\n",
            'src/utils/format.js': "export const format = () => '';\n",
        })

        graph = build(project, 'src/App.jsx')

        assert 'src/utils/format.js' in graph.files

    def test_parse_error_keeps_file_but_stops_walk(self, make_project):
        project = make_project({
            'src/Broken.jsx': "import { helper } from './helper';\nexport const Broken = (;\n",
            'src/helper.js': "export const helper = 1;\n",
        })

        graph = build(project, 'src/Broken.jsx')

        assert graph.files == ['src/Broken.jsx']

    def test_multiple_entries_share_state(self, make_project):
        project = make_project({
            'src/A.jsx': "import { x } from './shared';\nexport const A = () => x;\n",
            'src/B.jsx': "import { y } from './shared';\nexport const B = () => y;\n",
            'src/shared.js': "export const x = 1;\nexport const y = 2;\nexport const z = 3;\n",
        })

        graph = build(project, 'src/A.jsx', 'src/B.jsx')

        assert graph.files == ['src/A.jsx', 'src/shared.js', 'src/B.jsx']
        assert graph.used_bindings['src/shared.js'] == {'x', 'y'}

    def test_builds_do_not_leak_into_each_other(self, make_project):
        project = make_project({
            'src/A.jsx': "import { x } from './shared';\nexport const A = () => x;\n",
            'src/B.jsx': "export const B = 1;\n",
            'src/shared.js': "export const x = 1;\n",
        })
        builder = DependencyGraphBuilder(project)

        builder.build_graph(['src/A.jsx'])
        second = builder.build_graph(['src/B.jsx'])

        assert second.files == ['src/B.jsx']
        assert second.used_bindings == {}

    def test_unreadable_file_stays_out_for_every_importer(self, make_project, monkeypatch):
        project = make_project({
            'src/a.js': "import { gone } from './gone';\nimport { b } from './b';\nexport const a = () => gone + b;\n",
            'src/b.js': "import { gone } from './gone';\nexport const b = gone;\n",
            'src/gone.js': "export const gone = 1;\n",
        })
        read_bytes = Path.read_bytes

        def deny_gone(path):
            if path.name == 'gone.js':
                raise PermissionError(f"Permission denied: {path}")
            return read_bytes(path)

        monkeypatch.setattr(Path, 'read_bytes', deny_gone)

        graph = build(project, 'src/a.js')

        assert graph.files == ['src/a.js', 'src/b.js']
        assert 'src/gone.js' not in graph.graph
        assert 'src/gone.js' not in graph.used_bindings
        assert graph.graph.number_of_edges() == 1

    def test_entries_are_recorded(self, make_project):
        project = make_project({
            'src/pages/Login.jsx': """
                import { check } from '../utils/check';
                export const EMAIL_RE = /@/;
                export default function Login() { return check('a'); }
            """,
            'src/utils/check.js': """
                import { EMAIL_RE } from '../pages/Login';
                export const check = (s) => EMAIL_RE.test(s);
            """,
        })

        graph = build(project, 'src/pages/Login.jsx')

        assert graph.entries == {'src/pages/Login.jsx'}
        assert graph.used_bindings['src/pages/Login.jsx'] == {'EMAIL_RE'}


class TestUsedBindings:
    """What each importer records about the names it pulls in."""

    def test_alias_records_imported_name(self, make_project):
        project = make_project({
            'src/App.jsx': "import { Button as Btn } from './Button';\nexport const App = () => <Btn />;\n",
            'src/Button.jsx': "export const Button = () => null;\nexport const Other = 1;\n",
        })

        graph = build(project, 'src/App.jsx')

        assert graph.used_bindings['src/Button.jsx'] == {'Button'}

    def test_default_import_records_default(self, make_project):
        project = make_project({
            'src/App.jsx': "import Header from './Header';\nexport const App = () => <Header />;\n",
            'src/Header.jsx': "export default function Header() { return null; }\n",
        })

        graph = build(project, 'src/App.jsx')

        assert graph.used_bindings['src/Header.jsx'] == {'default'}
        assert graph.exports['src/Header.jsx'] == {'default', 'Header'}

    def test_unreferenced_import_records_nothing(self, make_project):
        project = make_project({
            'src/App.jsx': "import { unused } from './lib';\nexport const App = () => null;\n",
            'src/lib.js': "export const unused = 1;\n",
        })

        graph = build(project, 'src/App.jsx')

        assert 'src/lib.js' in graph.files
        assert graph.used_bindings['src/lib.js'] == set()
        assert 'src/lib.js' not in graph.fully_used

    def test_namespace_require_and_dynamic_are_whole_module(self, make_project):
        project = make_project({
            'src/App.jsx': """
                import * as api from './api';
                const config = require('./config');
                export const App = () => import('./Lazy').then(() => api.get(config));
            """,
            'src/api.js': "export const get = () => 1;\n",
            'src/config.js': "module.exports = { url: '/' };\n",
            'src/Lazy.jsx': "export default function Lazy() { return null; }\n",
        })

        graph = build(project, 'src/App.jsx')

        assert graph.fully_used == {'src/api.js', 'src/config.js', 'src/Lazy.jsx'}
        assert graph.used_bindings['src/api.js'] == set()

    def test_reexport_through_directory_index(self, react_app):
        graph = build(react_app, 'src/pages/Login.jsx')

        assert graph.files == [
            'src/pages/Login.jsx',
            'src/components/Button/index.js',
            'src/components/Button/Button.jsx',
            'src/components/Button/Button.css',
            'src/utils/format.js',
            'src/utils/validation.js',
            'src/styles/login.css',
        ]
        assert graph.used_bindings['src/components/Button/index.js'] == {'Button'}
        assert graph.used_bindings['src/components/Button/Button.jsx'] == {'Button', 'IconButton'}
        assert graph.used_bindings['src/utils/format.js'] == {'capitalize'}
        assert 'src/components/UserCard/UserCard.jsx' not in graph.files

    def test_export_star_marks_target_whole(self, make_project):
        project = make_project({
            'src/App.jsx': "import { Star } from './icons';\nexport const App = () => <Star />;\n",
            'src/icons/index.js': "export * from './all';\n",
            'src/icons/all.js': "export const Star = () => null;\nexport const Moon = () => null;\n",
        })

        graph = build(project, 'src/App.jsx')

        assert graph.used_bindings['src/icons/index.js'] == {'Star'}
        assert 'src/icons/all.js' in graph.fully_used

    def test_edges_carry_names(self, make_project):
        project = make_project({
            'src/App.jsx': "import { a, b } from './lib';\nexport const App = () => a + b;\n",
            'src/lib.js': "export const a = 1;\nexport const b = 2;\n",
        })

        graph = build(project, 'src/App.jsx')

        assert graph.graph.edges['src/App.jsx', 'src/lib.js']['names'] == {'a', 'b'}
        assert graph.importers_of('src/lib.js') == ['src/App.jsx']
