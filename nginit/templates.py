"""
Static project templates for ng-init.

Data tables only: project templates (``ng new`` options plus packages),
library bundles, configuration presets, folder structures and the text
of generated docs. Nothing here touches the filesystem or the network.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Final, Mapping, Optional

# ---------------------------------------------------------------------------
# Project templates
# ---------------------------------------------------------------------------

#: Template key → display name, ``ng new`` options, packages, devPackages.
PROJECT_TEMPLATES: Final[Mapping[str, Mapping[str, Any]]] = {
    "basic": {
        "name": "Basic SPA",
        "description": "Minimal setup with routing",
        "options": {"routing": True, "style": "css", "strict": False, "standalone": False},
        "packages": [],
        "dev_packages": [],
    },
    "enterprise": {
        "name": "Enterprise",
        "description": "NgRx, Angular Material, strict mode, ESLint",
        "options": {"routing": True, "style": "scss", "strict": True, "standalone": False},
        "packages": [
            "@angular/material",
            "@angular/cdk",
            "@ngrx/store",
            "@ngrx/effects",
            "@ngrx/entity",
            "@ngrx/store-devtools",
            "eslint",
        ],
        "dev_packages": [
            "@typescript-eslint/eslint-plugin",
            "@typescript-eslint/parser",
        ],
    },
    "pwa": {
        "name": "PWA Ready",
        "description": "Service workers, manifest, offline support",
        "options": {"routing": True, "style": "scss", "strict": True, "standalone": False},
        "packages": ["@angular/pwa", "@angular/service-worker"],
        "dev_packages": [],
    },
    "material": {
        "name": "Material Design",
        "description": "Angular Material UI components",
        "options": {"routing": True, "style": "scss", "strict": False, "standalone": False},
        "packages": ["@angular/material", "@angular/cdk"],
        "dev_packages": [],
    },
    "testing": {
        "name": "Testing Ready",
        "description": "Jest, Testing Library, Spectator",
        "options": {"routing": True, "style": "scss", "strict": True, "standalone": False},
        "packages": ["@testing-library/angular", "@ngneat/spectator"],
        "dev_packages": ["jest", "@types/jest", "jest-preset-angular"],
    },
    "standalone": {
        "name": "Standalone Components",
        "description": "Modern Angular with standalone components",
        "options": {"routing": True, "style": "scss", "strict": True, "standalone": True},
        "packages": [],
        "dev_packages": [],
    },
}

# ---------------------------------------------------------------------------
# Library bundles
# ---------------------------------------------------------------------------

#: Bundle key → display name, description, packages and devPackages
#: (``name@version`` specifiers).
LIBRARY_BUNDLES: Final[Mapping[str, Mapping[str, Any]]] = {
    "uiFramework": {
        "name": "UI Framework Bundle",
        "description": "Angular Material + CDK",
        "packages": ["@angular/material", "@angular/cdk"],
        "dev_packages": [],
    },
    "stateManagement": {
        "name": "State Management Bundle",
        "description": "NgRx + Entity + Effects + DevTools",
        "packages": ["@ngrx/store", "@ngrx/effects", "@ngrx/entity", "@ngrx/store-devtools"],
        "dev_packages": [],
    },
    "forms": {
        "name": "Form & Validation Bundle",
        "description": "Reactive Forms utilities and validators",
        "packages": ["ngx-mask", "@angular/forms"],
        "dev_packages": [],
    },
    "testing": {
        "name": "Testing Bundle",
        "description": "Jest + Testing Library + Spectator",
        "packages": [],
        "dev_packages": [
            "jest",
            "@types/jest",
            "jest-preset-angular",
            "@testing-library/angular",
            "@ngneat/spectator",
        ],
    },
    "performance": {
        "name": "Performance Bundle",
        "description": "Angular Universal + optimization tools",
        "packages": ["@nguniversal/express-engine"],
        "dev_packages": [],
    },
    "authentication": {
        "name": "Authentication Bundle",
        "description": "Auth utilities and Firebase",
        "packages": ["@angular/fire", "firebase"],
        "dev_packages": [],
    },
    "utilities": {
        "name": "Utilities Bundle",
        "description": "Common utility libraries",
        "packages": ["lodash", "date-fns", "rxjs"],
        "dev_packages": [],
    },
    "http": {
        "name": "HTTP & API Bundle",
        "description": "HTTP client and API tools",
        "packages": ["@angular/common", "axios"],
        "dev_packages": [],
    },
}

# ---------------------------------------------------------------------------
# Configuration presets
# ---------------------------------------------------------------------------


def _strict_tsconfig(existing: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge strict compiler options into an existing tsconfig."""
    merged: Dict[str, Any] = copy.deepcopy(dict(existing or {}))
    compiler_options = dict(merged.get("compilerOptions") or {})
    compiler_options.update(
        {
            "strict": True,
            "noImplicitAny": True,
            "noImplicitReturns": True,
            "noFallthroughCasesInSwitch": True,
            "strictNullChecks": True,
        }
    )
    merged["compilerOptions"] = compiler_options
    return merged


_LINT_STAGED_CONFIG = """module.exports = {
  '*.{js,ts}': ['eslint --fix', 'prettier --write'],
  '*.{json,md}': ['prettier --write']
};
"""

#: Preset key → files to write, packages to install and scripts to add.
#: A callable file value receives the parsed existing file (or ``None``)
#: and returns the new content.
CONFIG_PRESETS: Final[Mapping[str, Mapping[str, Any]]] = {
    "typescript": {
        "name": "TypeScript Strict Mode",
        "files": {"tsconfig.json": _strict_tsconfig},
    },
    "eslint": {
        "name": "ESLint + Prettier",
        "dev_packages": ["eslint", "prettier", "eslint-config-prettier", "eslint-plugin-prettier"],
        "files": {
            ".eslintrc.json": {
                "extends": [
                    "eslint:recommended",
                    "plugin:@typescript-eslint/recommended",
                    "prettier",
                ],
                "parser": "@typescript-eslint/parser",
                "plugins": ["@typescript-eslint", "prettier"],
                "rules": {"prettier/prettier": "error"},
            },
            ".prettierrc": {
                "semi": True,
                "singleQuote": True,
                "trailingComma": "es5",
                "printWidth": 100,
                "tabWidth": 2,
            },
        },
    },
    "husky": {
        "name": "Husky Pre-commit Hooks",
        "dev_packages": ["husky", "lint-staged"],
        "scripts": {"prepare": "husky install", "pre-commit": "lint-staged"},
        "files": {
            ".husky/pre-commit": '#!/bin/sh\n. "$(dirname "$0")/_/husky.sh"\n\nnpx lint-staged\n',
            "lint-staged.config.js": _LINT_STAGED_CONFIG,
        },
    },
}

# ---------------------------------------------------------------------------
# Folder structures
# ---------------------------------------------------------------------------

PROJECT_STRUCTURE: Final[Mapping[str, Mapping[str, Any]]] = {
    "standard": {
        "name": "Standard Structure",
        "folders": [
            "src/app/core",
            "src/app/core/services",
            "src/app/core/guards",
            "src/app/core/interceptors",
            "src/app/shared",
            "src/app/shared/components",
            "src/app/shared/directives",
            "src/app/shared/pipes",
            "src/app/features",
            "src/app/models",
            "src/assets/images",
            "src/assets/styles",
            "src/environments",
        ],
        "files": {
            "src/app/core/README.md": "# Core Module\n\nSingleton services, guards, and interceptors go here.\n",
            "src/app/shared/README.md": "# Shared Module\n\nReusable components, directives, and pipes go here.\n",
            "src/app/features/README.md": "# Features\n\nFeature modules go here.\n",
            "src/app/models/README.md": "# Models\n\nTypeScript interfaces and types go here.\n",
        },
    },
    "domain": {
        "name": "Domain-Driven Structure",
        "folders": [
            "src/app/core",
            "src/app/shared",
            "src/app/domains",
            "src/app/infrastructure",
        ],
        "files": {},
    },
}

# ---------------------------------------------------------------------------
# Git
# ---------------------------------------------------------------------------

GITIGNORE: Final[str] = """# See http://help.github.com/ignore-files/ for more about ignoring files.

# Compiled output
/dist
/tmp
/out-tsc
/bazel-out

# Node
/node_modules
npm-debug.log
yarn-error.log

# IDEs and editors
.idea/
.project
.classpath
.c9/
*.launch
.settings/
*.sublime-workspace

# Visual Studio Code
.vscode/*
!.vscode/settings.json
!.vscode/tasks.json
!.vscode/launch.json
!.vscode/extensions.json
.history/*

# Miscellaneous
/.angular/cache
.sass-cache/
/connect.lock
/coverage
/libpeerconnection.log
testem.log
/typings

# System files
.DS_Store
Thumbs.db

# Environment
.env
.env.local
"""

INITIAL_COMMIT_MESSAGE: Final[str] = "Initial commit: Angular project setup"

# ---------------------------------------------------------------------------
# Documentation
# ---------------------------------------------------------------------------

_README_TEMPLATE = """# {name}

{description}

## Description

This project was generated with Angular CLI.

## Development server

Run `ng serve` for a dev server. Navigate to `http://localhost:4200/`. The application will automatically reload if you change any of the source files.

## Code scaffolding

Run `ng generate component component-name` to generate a new component. You can also use `ng generate directive|pipe|service|class|guard|interface|enum|module`.

## Build

Run `ng build` to build the project. The build artifacts will be stored in the `dist/` directory.

## Running unit tests

Run `ng test` to execute the unit tests via your test runner.

## Running end-to-end tests

Run `ng e2e` to execute the end-to-end tests via a platform of your choice.

## Further help

To get more help on the Angular CLI use `ng help` or go check out the [Angular CLI Overview and Command Reference](https://angular.io/cli) page.

## Project Structure

```
src/
├── app/
│   ├── core/           # Singleton services, guards
│   ├── shared/         # Common components, pipes, directives
│   ├── features/       # Feature modules
│   ├── models/         # TypeScript interfaces/types
│   └── services/       # Business logic services
```

## Contributing

1. Fork the repository
2. Create your feature branch (`git checkout -b feature/amazing-feature`)
3. Commit your changes (`git commit -m 'Add some amazing feature'`)
4. Push to the branch (`git push origin feature/amazing-feature`)
5. Open a Pull Request

## License

This project is licensed under the MIT License.
"""


def render_readme(name: str, description: Optional[str] = None) -> str:
    """Render the README of a generated project."""
    return _README_TEMPLATE.format(
        name=name,
        description=description or "An Angular application",
    )


CHANGELOG: Final[str] = """# Changelog

All notable changes to this project will be documented in this file.

## [Unreleased]

### Added
- Initial project setup

### Changed

### Fixed

### Removed
"""
