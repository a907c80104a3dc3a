import os
import re
from logging import getLogger
from typing import List, Dict

from .catalog import Catalog
from ..common.config import C
from ..common.util import iter_tree, to_slashes
from ..java.archive import list_classes, one_jar_from
from ..java.model import Dependency
from ..workspace.workspace import Workspace

log = getLogger(__name__)


def scan(directory: str, extension: str) -> List[str]:
    """Recursively collects the files with the given extension, paths are slash separated"""
    log.info(f'Recursively scanning {directory} for {extension} files')
    files = [
        to_slashes(os.path.normpath(path))
        for path in iter_tree(directory)
        if path.endswith(extension)
    ]
    log.info(f'Found {len(files)} files')
    return files


def rule_name_from_module(module: str) -> str:
    # Keeps a 1:1 relationship between module locations and rule names
    return module.replace('/', '_')


def source_dependencies(directory: str) -> List[Dependency]:
    """Turns each Maven module's source folder into a single dependency

    The name is the suggested rule name, the external reference is the
    source path into the module, like ui/web/src/main/java/
    """
    layout = C.SOURCE_LAYOUT
    extension = C.SOURCE_EXTENSION
    rx_layout = re.compile(r'(.*)' + re.escape(layout) + r'(.*)')

    modules: Dict[str, List[str]] = {}
    for path in scan(directory, extension):
        # Module paths and glob roots are relative to the workspace
        path = to_slashes(os.path.relpath(path, directory))
        m = rx_layout.fullmatch(path)
        if m is None:
            log.info(f'Skip {path}, missing {layout}?')
            continue

        module, relpath = m.groups()
        class_name = relpath[:-len(extension)].replace('/', '.')
        modules.setdefault(module, []).append(class_name)

    return [
        Dependency(
            name=rule_name_from_module(module),
            external_reference=module + layout,
            resources=class_names,
        )
        for module, class_names in modules.items()
    ]


def external_dependencies(workspace: Workspace) -> List[Dependency]:
    """Lists the classes in the jars of all materialized external dependencies"""
    base = workspace.output_base()

    dependencies = []
    for label in workspace.list_external_dependencies():
        log.info(f'Processing dependency {label}')
        directory = os.path.join(base, 'external', label.removeprefix(C.EXTERNAL_PREFIX), 'jar')

        # Some external dependencies may be declared, but not used
        if not os.path.isdir(directory):
            log.info(f'Skip non-existent dependency {label}')
            continue

        jar = one_jar_from(directory)
        dependencies.append(Dependency(name=label, external_reference=jar, resources=list_classes(jar)))

    return dependencies


def build_catalog(directory: str, workspace: Workspace) -> Catalog:
    sources = source_dependencies(directory)
    log.info(f'Found {len(sources)} source dependencies')

    externals = external_dependencies(workspace)
    log.info(f'Found {len(externals)} external dependencies')

    return Catalog(dependencies=sources + externals)
