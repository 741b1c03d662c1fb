"""
Interactive project wizard for ng-init.

The wizard is a linear, branchy sequence of prompts and external process
calls:

1. Check the local toolchain (node, npm, nvm, Angular CLI).
2. Pick an Angular version (latest, or major → minor → patch).
3. Check Node.js against the version's ``engines.node`` range and offer
   to switch or install through nvm.
4. Pick a project name (valid and not an occupied directory).
5. Start from a saved profile or a project template.
6. Collect libraries (search, manual entry or bundles), checking each
   explicit version against the target Angular version.
7. Resolve compatible versions for every library; let the user skip or
   keep the ones flagged with warnings.
8. Generate the project with ``npx @angular/cli@{version} new``.
9. Add folder structure, configuration presets and docs.
10. Install dependencies, initialize git, and offer to save a profile.

All user interaction goes through a :class:`~nginit.utils.console.Prompter`
so tests can drive the wizard with scripted answers.
"""

from __future__ import annotations

import re
import platform
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from nginit.config import NgInitConfig
from nginit.core import engines, environment, installer, scaffold
from nginit.core.profiles import ProfileStore
from nginit.core.registry import RegistryClient, format_downloads
from nginit.core.resolver import CompatibilityResolver, resolve_libraries
from nginit.exceptions import CommandError, FileOperationError, WizardAbortedError
from nginit.models.compatibility import LATEST, LibraryRequest, LibraryResolution
from nginit.models.environment import SystemVersions
from nginit.models.profile import Profile, ProfileLibrary
from nginit.templates import (
    CONFIG_PRESETS,
    INITIAL_COMMIT_MESSAGE,
    LIBRARY_BUNDLES,
    PROJECT_STRUCTURE,
    PROJECT_TEMPLATES,
)
from nginit.utils.console import (
    Choice,
    Prompter,
    colorize_source,
    get_raw_console,
    print_error,
    print_info,
    print_rule,
    print_success,
    print_table,
    print_warning,
    status,
)
from nginit.utils.logger import get_logger
from nginit.utils.version_utils import (
    filter_stable_versions,
    major_versions,
    minor_versions_for_major,
    patch_versions_for_minor,
    sort_versions_desc,
)

logger = get_logger("wizard")

_PACKAGE_NAME = re.compile(r"^(@[a-z0-9-~][a-z0-9-._~]*/)?[a-z0-9-~][a-z0-9-._~]*$")

SEARCH_RESULTS = 15


@dataclass
class WizardOptions:
    """Answers supplied up front (from CLI flags) instead of prompts."""

    project_name: Optional[str] = None
    angular_version: Optional[str] = None
    profile: Optional[str] = None
    template: Optional[str] = None
    directory: Path = field(default_factory=Path.cwd)
    skip_install: bool = False
    skip_git: bool = False


@dataclass
class WizardResult:
    """What a completed wizard run produced."""

    project_name: str
    project_path: Path
    angular_version: str
    template: Optional[str] = None
    profile: Optional[str] = None
    resolutions: List[LibraryResolution] = field(default_factory=list)
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    legacy_peer_deps: bool = False
    git_initialized: bool = False
    saved_profile: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class Wizard:
    """Drive one interactive project creation.

    Args:
        prompter: Source of user answers.
        registry: Registry client of the current session.
        resolver: Compatibility resolver of the current session.
        config: Loaded configuration.
        profiles: Profile store; built from ``config.profiles_dir`` when
            omitted.
    """

    def __init__(
        self,
        prompter: Prompter,
        registry: RegistryClient,
        resolver: CompatibilityResolver,
        config: Optional[NgInitConfig] = None,
        profiles: Optional[ProfileStore] = None,
    ) -> None:
        self.prompter = prompter
        self.registry = registry
        self.resolver = resolver
        self.config = config or NgInitConfig()
        self.profiles = profiles or ProfileStore(self.config.profiles_dir)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, options: Optional[WizardOptions] = None) -> WizardResult:
        """Run the wizard to completion.

        Raises:
            WizardAbortedError: A blocking problem or the user declined to
                continue.
            CommandError: Project generation failed.
        """
        options = options or WizardOptions()

        system = await self._check_environment()
        angular_version = await self._choose_angular_version(options.angular_version)
        await self._check_node(angular_version, system)
        project_name = self._choose_project_name(options)
        project_path = options.directory / project_name

        result = WizardResult(
            project_name=project_name,
            project_path=project_path,
            angular_version=angular_version,
        )

        profile_name, profile = self._choose_profile(options.profile)
        if profile is not None:
            result.profile = profile_name
            result.template = profile.template
            ng_options = dict(profile.options)
            requests = [lib.to_request() for lib in profile.libraries]
        else:
            template_key = self._choose_template(options.template)
            result.template = template_key
            ng_options = dict(PROJECT_TEMPLATES[template_key]["options"])
            requests = self._template_requests(template_key)
            requests.extend(await self._collect_libraries(angular_version))

        requests = _dedupe(requests)
        accepted: List[LibraryResolution] = []
        if requests:
            result.resolutions = await self._resolve(requests, angular_version)
            accepted = self._accepted(result.resolutions, result)

        ng_options["skip_install"] = True
        print_rule("Creating project")
        await installer.create_angular_project(
            project_name, angular_version, ng_options, cwd=options.directory
        )
        print_success(f"Angular project {project_name} created")

        dev_extras = self._scaffold(project_path, project_name, result)

        if not options.skip_install:
            await self._install(project_path, result, accepted, dev_extras)

        if not options.skip_git:
            await self._init_git(project_path, result)

        if profile is None:
            self._offer_profile_save(angular_version, result, ng_options)

        self._print_summary(result)
        return result

    # ------------------------------------------------------------------
    # Step 1: environment
    # ------------------------------------------------------------------

    async def _check_environment(self) -> SystemVersions:
        with status("Checking system environment..."):
            system = await environment.get_system_versions()

        print_table(
            [
                {"Tool": "Node.js", "Version": _show(system.node, required=True)},
                {"Tool": "npm", "Version": _show(system.npm, required=True)},
                {"Tool": "nvm", "Version": _show(system.nvm)},
                {"Tool": "Angular CLI", "Version": _show(system.angular_cli)},
            ],
            title="System Environment",
        )

        if not system.has_node:
            print_error("Node.js is required but was not found")
            if platform.system() == "Windows" and self.prompter.confirm(
                "Install Node.js LTS with winget?", default=True
            ):
                if await installer.install_node_with_winget():
                    print_success("Node.js installed; restart your terminal and run ng-init again")
            raise WizardAbortedError("Node.js is not installed", step="environment")

        return system

    # ------------------------------------------------------------------
    # Step 2: Angular version
    # ------------------------------------------------------------------

    async def _choose_angular_version(self, requested: Optional[str]) -> str:
        if requested:
            if not engines.is_valid_angular_version(requested):
                raise WizardAbortedError(
                    f"Invalid Angular version: {requested}", step="angular-version"
                )
            return requested

        with status("Fetching Angular versions..."):
            available = await self.registry.get_angular_versions()

        if not available.versions:
            print_warning("Could not fetch Angular versions from the registry")
            return self.prompter.ask(
                "Enter the Angular version to use (x.y.z):",
                validate=lambda v: engines.is_valid_angular_version(v)
                or "Enter a full version such as 17.3.0",
            )

        latest = available.latest or available.versions[0]
        method = self.prompter.select(
            "Which Angular version would you like to use?",
            [
                Choice(f"Latest ({latest})", "latest"),
                Choice("Choose a specific version", "specific"),
            ],
            default="latest",
        )
        if method == "latest":
            return latest

        return self._pick_version_tiers(
            "Angular", available.versions, latest=latest, lts=available.lts
        )

    def _pick_version_tiers(
        self,
        label: str,
        versions: Sequence[str],
        *,
        latest: Optional[str] = None,
        lts: Optional[str] = None,
    ) -> str:
        """Walk the user through major → minor → patch selection."""
        stable = sort_versions_desc(filter_stable_versions(versions))

        major_choices = []
        for major in major_versions(stable):
            tag = " (latest)" if latest and latest.startswith(f"{major}.") else ""
            major_choices.append(Choice(f"{label} {major}{tag}", major))
        major = self.prompter.select(f"Select {label} major version:", major_choices)

        minor = self.prompter.select(
            f"Select {label} {major} minor version:",
            [Choice(f"v{mm}.x", mm) for mm in minor_versions_for_major(stable, major)],
        )

        patch_choices = []
        for patch in patch_versions_for_minor(stable, minor):
            text = f"v{patch}"
            if patch == latest:
                text += " (latest)"
            if patch == lts:
                text += " (LTS)"
            patch_choices.append(Choice(text, patch))
        return self.prompter.select(f"Select {label} {minor} patch version:", patch_choices)

    # ------------------------------------------------------------------
    # Step 3: Node.js compatibility
    # ------------------------------------------------------------------

    async def _check_node(self, angular_version: str, system: SystemVersions) -> None:
        required = await engines.node_requirement_for_angular(self.registry, angular_version)
        compat = engines.check_node_compatibility(system.node, required)
        if compat.compatible:
            print_success(f"Node.js v{system.node} satisfies {required}")
            return

        print_warning(
            f"Angular {angular_version} requires Node.js {required}, "
            f"current is v{system.node}"
        )
        recommended = engines.recommended_node_version(required)

        if system.has_nvm:
            installed = await environment.list_installed_node_versions()
            candidates = engines.find_compatible_versions(installed, required)
            if candidates:
                target = candidates[0]
                if self.prompter.confirm(f"Switch to installed Node.js v{target} with nvm?", default=True):
                    if await environment.switch_node_version(target):
                        print_success(f"Switched to Node.js v{target}")
                        return
                    print_error(f"nvm use {target} failed")
            elif self.prompter.confirm(
                f"Install Node.js v{recommended} with nvm?", default=True
            ):
                if await environment.install_node_version(recommended) and (
                    await environment.switch_node_version(recommended)
                ):
                    print_success(f"Installed and switched to Node.js v{recommended}")
                    return
                print_error(f"Could not install Node.js v{recommended}")
        else:
            self._print_nvm_guide()

        if not self.prompter.confirm(
            "Continue with the current Node.js version anyway?", default=False
        ):
            raise WizardAbortedError(
                f"Node.js {required} is required for Angular {angular_version}",
                step="node",
            )

    def _print_nvm_guide(self) -> None:
        guide = installer.nvm_install_instructions()
        console = get_raw_console()
        print_rule("NVM Installation Guide")
        console.print(f"OS: [highlight]{guide.os}[/highlight]")
        if guide.download:
            console.print(f"Download: {guide.download}")
        if guide.repo:
            console.print(f"Repository: {guide.repo}")
        if guide.install:
            console.print(f"\nInstall command:\n  [success]{guide.install}[/success]")
        if guide.alternative:
            console.print(f"\nAlternative:\n  [success]{guide.alternative}[/success]")
        console.print("\nSteps:")
        for index, step in enumerate(guide.steps, start=1):
            console.print(f"  {index}. {step}", style="dim")
        for index, step in enumerate(guide.post_install, start=1):
            console.print(f"  post-install {index}. {step}", style="dim")
        print_rule()

    # ------------------------------------------------------------------
    # Step 4: project name
    # ------------------------------------------------------------------

    def _choose_project_name(self, options: WizardOptions) -> str:
        if options.project_name:
            verdict = scaffold.validate_directory_name(options.project_name)
            if verdict is not True:
                raise WizardAbortedError(str(verdict), step="project-name")
            if not scaffold.is_directory_empty(options.directory / options.project_name):
                raise WizardAbortedError(
                    f"Directory {options.project_name} already exists and is not empty",
                    step="project-name",
                )
            return options.project_name

        def validate(name: str):
            verdict = scaffold.validate_directory_name(name)
            if verdict is not True:
                return verdict
            if not scaffold.is_directory_empty(options.directory / name):
                return f"Directory {name} already exists and is not empty"
            return True

        return self.prompter.ask("Enter Angular project name:", validate=validate)

    # ------------------------------------------------------------------
    # Step 5: profile or template
    # ------------------------------------------------------------------

    def _choose_profile(self, requested: Optional[str]) -> Tuple[Optional[str], Optional[Profile]]:
        if requested:
            profile = self.profiles.load(requested)
            if profile is None:
                raise WizardAbortedError(f"Profile '{requested}' not found", step="profile")
            return requested, profile

        names = self.profiles.list_names()
        if not names:
            return None, None

        choice = self.prompter.select(
            "Start from a saved profile?",
            [Choice("No, configure a new project", None)] + [Choice(n, n) for n in names],
        )
        if choice is None:
            return None, None
        return choice, self.profiles.load(choice)

    def _choose_template(self, requested: Optional[str]) -> str:
        if requested:
            if requested not in PROJECT_TEMPLATES:
                raise WizardAbortedError(f"Unknown template: {requested}", step="template")
            return requested

        return self.prompter.select(
            "Choose a project template:",
            [
                Choice(t["name"], key, t["description"])
                for key, t in PROJECT_TEMPLATES.items()
            ],
            default="basic",
        )

    @staticmethod
    def _template_requests(template_key: str) -> List[LibraryRequest]:
        template = PROJECT_TEMPLATES[template_key]
        requests = [LibraryRequest(name) for name in template.get("packages", [])]
        requests.extend(
            LibraryRequest(name, is_dev_dependency=True)
            for name in template.get("dev_packages", [])
        )
        return requests

    # ------------------------------------------------------------------
    # Step 6: libraries
    # ------------------------------------------------------------------

    async def _collect_libraries(self, angular_version: str) -> List[LibraryRequest]:
        method = self.prompter.select(
            "How would you like to add libraries?",
            [
                Choice("Interactive search (Recommended)", "interactive"),
                Choice("Manual entry", "manual"),
                Choice("Choose from popular bundles", "bundles"),
                Choice("Skip for now", "skip"),
            ],
            default="interactive",
        )
        if method == "interactive":
            return await self._interactive_search(angular_version)
        if method == "manual":
            return await self._manual_entry(angular_version)
        if method == "bundles":
            return self._choose_bundles()
        return []

    async def _interactive_search(self, angular_version: str) -> List[LibraryRequest]:
        selected: List[LibraryRequest] = []
        print_info(f"Angular version: {angular_version} (compatibility will be checked)", style="dim")

        while True:
            query = self.prompter.ask(
                "Search for a library (empty to finish):", default=""
            )
            if len(query) < 2:
                break

            with status(f"Searching npm for '{query}'..."):
                hits = await self.registry.search_packages(query, SEARCH_RESULTS)
            if not hits:
                print_warning(f"No packages found for '{query}'")
                continue

            name = self.prompter.select(
                "Select a library:",
                [
                    Choice(
                        f"{hit.name}{' ✓' if hit.verified else ''} (v{hit.version})",
                        hit.name,
                        _shorten(hit.description),
                    )
                    for hit in hits
                ]
                + [Choice("Search again", None)],
            )
            if name is None:
                continue

            request = await self._pick_library_version(name, angular_version)
            if request is not None:
                selected.append(request)
                print_success(f"Added {request.install_spec()} to installation queue")

            if not self.prompter.confirm("Add another library?", default=False):
                break

        return selected

    async def _pick_library_version(
        self,
        name: str,
        angular_version: str,
    ) -> Optional[LibraryRequest]:
        details = await self.registry.get_package_details(name)
        if details is None:
            print_warning(f"Could not fetch details for {name}; using latest")
            return LibraryRequest(name)

        metadata = details.metadata
        latest = metadata.latest or LATEST
        print_info(f"{metadata.name}: {metadata.description}", style="dim")
        print_info(
            f"Latest version: {latest} | Weekly downloads: "
            f"{format_downloads(details.weekly_downloads)}",
            style="dim",
        )

        method = self.prompter.select(
            "How would you like to select the version?",
            [
                Choice(f"Use compatible latest (resolved for Angular {angular_version})", "latest"),
                Choice("Choose specific version (major.minor.patch)", "specific"),
                Choice("Enter version manually", "manual"),
            ],
            default="latest",
        )
        if method == "latest":
            return LibraryRequest(name)

        if method == "specific" and filter_stable_versions(metadata.versions):
            version = self._pick_version_tiers(name, metadata.versions, latest=metadata.latest)
        else:
            version = self.prompter.ask(
                "Enter version:",
                default=metadata.latest,
                validate=lambda v: bool(v) or "Version is required",
            )

        return await self._confirm_version(name, version, angular_version)

    async def _confirm_version(
        self,
        name: str,
        version: str,
        angular_version: str,
    ) -> Optional[LibraryRequest]:
        """Check an explicit version and offer compatible alternatives."""
        if version == LATEST:
            return LibraryRequest(name)

        check = await self.resolver.check_version_compatibility(name, version, angular_version)
        if check.compatible:
            print_success(f"{name}@{version} is compatible with Angular {angular_version}")
            return LibraryRequest(name, version)

        print_warning(f"{name}@{version} may not be compatible with Angular {angular_version}")
        print_info(f"  {check.reason}", style="dim")

        if not self.prompter.confirm("Would you like to see compatible versions?", default=True):
            return LibraryRequest(name, version)

        with status("Searching for compatible versions..."):
            suggestions = await self.resolver.find_all_compatible_versions(name, angular_version)

        if suggestions:
            choices = [
                Choice(
                    s.version + (f" (peer: {s.peer_dependency})" if s.peer_dependency else ""),
                    s.version,
                )
                for s in suggestions
            ]
            choices.append(Choice("Keep selected version anyway", version))
            picked = self.prompter.select("Select a compatible version:", choices)
            return LibraryRequest(name, picked)

        print_warning("No compatible versions found automatically")
        if self.prompter.confirm("Continue with the selected version anyway?", default=False):
            return LibraryRequest(name, version)
        print_info(f"Skipping {name}", style="warning")
        return None

    async def _manual_entry(self, angular_version: str) -> List[LibraryRequest]:
        selected: List[LibraryRequest] = []
        while True:
            name = self.prompter.ask(
                "Enter library name (empty to finish):",
                default="",
                validate=lambda v: not v or bool(_PACKAGE_NAME.match(v)) or "Invalid package name format",
            )
            if not name:
                break

            version = self.prompter.ask(f"Enter version for {name} (or 'latest'):", default=LATEST)
            request = await self._confirm_version(name, version or LATEST, angular_version)
            if request is not None:
                selected.append(request)
                print_success(f"Added {request.install_spec()}")

            if not self.prompter.confirm("Add another library?", default=False):
                break
        return selected

    def _choose_bundles(self) -> List[LibraryRequest]:
        selected: List[LibraryRequest] = []
        while True:
            key = self.prompter.select(
                "Choose a library bundle:",
                [
                    Choice(bundle["name"], key, bundle["description"])
                    for key, bundle in LIBRARY_BUNDLES.items()
                ],
            )
            bundle = LIBRARY_BUNDLES[key]
            selected.extend(LibraryRequest(name) for name in bundle.get("packages", []))
            selected.extend(
                LibraryRequest(name, is_dev_dependency=True)
                for name in bundle.get("dev_packages", [])
            )
            print_success(f"Added {bundle['name']}")
            if not self.prompter.confirm("Add another bundle?", default=False):
                break
        return selected

    # ------------------------------------------------------------------
    # Step 7: resolution
    # ------------------------------------------------------------------

    async def _resolve(
        self,
        requests: List[LibraryRequest],
        angular_version: str,
    ) -> List[LibraryResolution]:
        with status(f"Resolving {len(requests)} library version(s) for Angular {angular_version}..."):
            resolutions = await resolve_libraries(self.resolver, requests, angular_version)

        rows = []
        for item in resolutions:
            if item.result is None:
                rows.append(
                    {
                        "Library": item.request.name,
                        "Version": "-",
                        "Source": "[red]error[/red]",
                        "Reason": item.error or "",
                    }
                )
                continue
            rows.append(
                {
                    "Library": item.request.name,
                    "Version": item.result.resolved_version_spec,
                    "Source": colorize_source(
                        item.result.source.value, warning=item.result.warning
                    ),
                    "Reason": item.result.reason,
                }
            )
        print_table(rows, title="Library Versions", show_row_lines=True)
        return resolutions

    def _accepted(self, resolutions: List[LibraryResolution], result: WizardResult) -> List[LibraryResolution]:
        accepted = []
        for item in resolutions:
            name = item.request.name
            if item.result is None:
                result.skipped.append(name)
                result.warnings.append(f"{name}: resolution failed ({item.error})")
                continue
            if item.result.warning and not self.prompter.confirm(
                f"{name} ({item.result.reason}). Install {item.result.resolved_version_spec} anyway?",
                default=False,
            ):
                result.skipped.append(name)
                continue
            if item.result.warning:
                result.warnings.append(f"{name}: {item.result.reason}")
            accepted.append(item)
        return accepted

    # ------------------------------------------------------------------
    # Steps 8-9: scaffolding
    # ------------------------------------------------------------------

    def _scaffold(self, project_path: Path, project_name: str, result: WizardResult) -> List[str]:
        """Write structure, presets and docs; return extra dev packages."""
        dev_extras: List[str] = []

        structure = self.prompter.select(
            "Choose a folder structure:",
            [Choice("Keep Angular CLI default", None)]
            + [Choice(s["name"], key) for key, s in PROJECT_STRUCTURE.items()],
        )
        try:
            if structure is not None:
                layout = PROJECT_STRUCTURE[structure]
                scaffold.create_project_folders(project_path, layout["folders"])
                scaffold.create_project_files(project_path, layout.get("files") or {})
                print_success(f"Created {layout['name']}")

            for key, preset in CONFIG_PRESETS.items():
                if self.prompter.confirm(f"Apply {preset['name']}?", default=False):
                    dev_extras.extend(scaffold.apply_config_preset(project_path, key))
                    print_success(f"Applied {preset['name']}")

            description = self.prompter.ask("Project description:", default="")
            scaffold.create_readme(project_path, project_name, description or None)
            scaffold.create_changelog(project_path)
            if not (project_path / ".gitignore").exists():
                scaffold.create_gitignore(project_path)
            print_success("Created README.md and CHANGELOG.md")
        except FileOperationError as exc:
            print_error(str(exc))
            result.warnings.append(f"scaffolding: {exc.message}")

        return dev_extras

    # ------------------------------------------------------------------
    # Step 10: install, git, profile
    # ------------------------------------------------------------------

    async def _install(
        self,
        project_path: Path,
        result: WizardResult,
        accepted: List[LibraryResolution],
        dev_extras: List[str],
    ) -> None:
        legacy_retry = self.config.legacy_peer_deps_retry

        prod = [i.request.install_spec(i.result.resolved_version_spec) for i in accepted if not i.request.is_dev_dependency]
        dev = [i.request.install_spec(i.result.resolved_version_spec) for i in accepted if i.request.is_dev_dependency]
        dev.extend(spec for spec in dev_extras if spec not in dev)

        steps = [("Installing dependencies...", [], False)]
        if prod:
            steps.append((f"Installing {len(prod)} package(s)...", prod, False))
        if dev:
            steps.append((f"Installing {len(dev)} dev package(s)...", dev, True))

        for message, packages, is_dev in steps:
            try:
                with status(message):
                    if packages:
                        outcome = await installer.install_packages(
                            packages, project_path, dev=is_dev, legacy_retry=legacy_retry
                        )
                    else:
                        outcome = await installer.run_npm_install(
                            project_path, legacy_retry=legacy_retry
                        )
            except CommandError as exc:
                print_error(f"{message.rstrip('.')} failed")
                print_info("You can try installing manually with:", style="warning")
                for line in installer.manual_install_hint(project_path, packages):
                    print_info(f"  {line}")
                result.warnings.append(f"npm install failed: {exc.message}")
                continue

            result.installed.extend(packages)
            if outcome.legacy_peer_deps:
                result.legacy_peer_deps = True
                print_warning("Installed with --legacy-peer-deps due to peer dependency conflicts")
            else:
                print_success(f"{message.rstrip('.')} done")

    async def _init_git(self, project_path: Path, result: WizardResult) -> None:
        if not self.prompter.confirm("Initialize a git repository with an initial commit?", default=True):
            return
        try:
            if not (project_path / ".git").exists():
                await scaffold.init_git_repo(project_path)
            await scaffold.create_initial_commit(project_path, INITIAL_COMMIT_MESSAGE)
        except CommandError as exc:
            print_warning(f"Git setup failed: {exc.message}")
            result.warnings.append(f"git: {exc.message}")
            return
        result.git_initialized = True
        print_success("Git repository initialized")

    def _offer_profile_save(
        self,
        angular_version: str,
        result: WizardResult,
        ng_options: Dict[str, Any],
    ) -> None:
        if not self.prompter.confirm("Save this setup as a profile?", default=False):
            return
        name = self.prompter.ask(
            "Profile name:", validate=lambda v: bool(v.strip()) or "Profile name is required"
        )
        libraries = [
            ProfileLibrary(
                name=item.request.name,
                version=item.request.requested_version,
                is_dev=item.request.is_dev_dependency,
            )
            for item in result.resolutions
            if item.request.name not in result.skipped
        ]
        options = {k: v for k, v in ng_options.items() if k != "skip_install"}
        profile = Profile(
            angular_version=angular_version,
            template=result.template,
            libraries=libraries,
            options=options,
        )
        try:
            self.profiles.save(name, profile)
        except FileOperationError as exc:
            print_error(f"Failed to save profile: {exc.message}")
            return
        result.saved_profile = name
        print_success(f"Profile \"{name}\" saved")

    def _print_summary(self, result: WizardResult) -> None:
        print_rule("Done")
        print_success(f"Created {result.project_name} (Angular {result.angular_version})")
        for warning in result.warnings:
            print_warning(warning)
        print_info(f"  cd {result.project_path}")
        print_info("  ng serve")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _show(version: Optional[str], *, required: bool = False) -> str:
    if version:
        return f"[success]v{version}[/success]"
    return "[error]Not installed[/error]" if required else "[warning]Not installed[/warning]"


def _shorten(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _dedupe(requests: List[LibraryRequest]) -> List[LibraryRequest]:
    """Keep the last request per library name, in first-seen order."""
    by_name: Dict[str, LibraryRequest] = {}
    for request in requests:
        by_name[request.name] = request
    return list(by_name.values())
