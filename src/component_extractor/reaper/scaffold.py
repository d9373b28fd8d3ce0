"""package.json and README generation for an extracted component."""
import json
import logging
from pathlib import Path
from typing import Dict, Iterable

logger = logging.getLogger(__name__)


def read_package_json(project_root: Path) -> Dict:
    """The original project's package.json, or {} when missing or invalid."""
    package_path = project_root / 'package.json'
    if not package_path.exists():
        return {}
    try:
        return json.loads(package_path.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        logger.warning("Could not read original package.json: %s", e)
        return {}


def build_package_json(original: Dict) -> Dict:
    """Manifest for the extracted tree; original dependencies override the React defaults."""
    dependencies = {
        'react': '^18.0.0',
        'react-dom': '^18.0.0',
    }
    dependencies.update(original.get('dependencies') or {})

    return {
        'name': f"{original.get('name') or 'react-component'}-extracted",
        'version': '1.0.0',
        'description': 'Extracted React component',
        'main': 'index.js',
        'scripts': {
            'start': 'react-scripts start',
            'build': 'react-scripts build',
            'test': 'react-scripts test',
            'eject': 'react-scripts eject',
        },
        'dependencies': dependencies,
        'devDependencies': {
            'react-scripts': '^5.0.0',
        },
        'browserslist': {
            'production': [
                '>0.2%',
                'not dead',
                'not op_mini all',
            ],
            'development': [
                'last 1 chrome version',
                'last 1 firefox version',
                'last 1 safari version',
            ],
        },
    }


def write_package_json(project_root: str | Path, output_dir: str | Path) -> Path:
    package = build_package_json(read_package_json(Path(project_root)))
    target = Path(output_dir) / 'package.json'
    target.write_text(json.dumps(package, indent=2) + "\n", encoding='utf-8')
    return target


README_TEMPLATE = """# {component} - Extracted React Component

This component was extracted from a larger React project together with the
source files it depends on. Code the component does not reach was removed.

## File Structure

```
{files}
```

## Install Dependencies

```bash
npm install
```

## Run

```bash
npm start
```

## Build

```bash
npm run build
```

## Notes

- This is an extracted component and may need adjustments for its new home
- Make sure all dependencies are installed
- Routing or other project-specific setup may need to be configured

## Original Project Path

{project_root}
"""


def write_readme(component: str, output_dir: str | Path, files: Iterable[str],
                 project_root: str | Path) -> Path:
    content = README_TEMPLATE.format(
        component=component,
        files="\n".join(f"- {path}" for path in files),
        project_root=Path(project_root),
    )
    target = Path(output_dir) / 'README.md'
    target.write_text(content, encoding='utf-8')
    return target
