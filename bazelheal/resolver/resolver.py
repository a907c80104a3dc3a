from logging import getLogger
from typing import List, Optional, Set

from pydantic import BaseModel

from .buildozer import add_deps, new_java_library
from ..catalog.catalog import Catalog
from ..common.config import C
from ..common.util import SimpleEnum
from ..java.model import BuildProblems, JavaClass
from ..workspace.workspace import Workspace

log = getLogger(__name__)


class Strategy(SimpleEnum):
    """How a missing class was found"""
    EXISTING_RULE = 'EXISTING_RULE'
    """An existing rule already has the class in its sources"""

    GENERATED_RULE = 'GENERATED_RULE'
    """A code generator rule named after the Java package, like the ones wsimport is run by"""

    CATALOG = 'CATALOG'
    """A source module or external jar from the class cache"""


class Fix(BaseModel):
    java_class: JavaClass
    strategy: Strategy
    commands: List[str]


class Resolution(BaseModel):
    """Outcome of resolving all the missing classes of a build"""

    fixes: List[Fix] = []
    skipped: List[JavaClass] = []
    """Classes not looked up, because their package was fixed already"""

    unresolved: List[JavaClass] = []

    @property
    def commands(self) -> List[str]:
        return [command for fix in self.fixes for command in fix.commands]


class Resolver:
    """Matches missing classes against the rules of the workspace and the class cache

    Strategies are tried in order from the cheapest and most specific to the
    broadest, the first one to succeed produces the buildozer commands.
    Only one class is resolved per Java package, since the dependency fixing
    one class of a package usually provides the rest of it as well.
    """

    def __init__(self, catalog: Catalog, workspace: Workspace):
        self.catalog: Catalog = catalog
        self.workspace: Workspace = workspace

    def resolve(self, problems: BuildProblems) -> Resolution:
        resolution = Resolution()
        packages_resolved: Set[str] = set()

        for java_class in problems.missing_class:
            if '.' not in java_class.name:
                log.warning(f'Cannot resolve {java_class.name}, class in the default package')
                resolution.unresolved.append(java_class)
                continue

            package = java_class.package
            if package in packages_resolved:
                log.info(f'Skipping resolution of class {java_class.name} as package {package} has already been resolved')
                resolution.skipped.append(java_class)
                continue

            log.info(f'Resolving missing dependency {java_class.name}')
            fix = self.resolve_class(problems.bazel_rule, java_class)
            if fix is None:
                log.warning(f'Cannot resolve {java_class.name}')
                resolution.unresolved.append(java_class)
                continue

            resolution.fixes.append(fix)
            packages_resolved.add(package)

        return resolution

    def resolve_class(self, rule: str, java_class: JavaClass) -> Optional[Fix]:
        # Sources from internal packages or rules
        label = self.workspace.find_rule_with_sources(java_class.name)
        if label is not None:
            return Fix(java_class=java_class, strategy=Strategy.EXISTING_RULE, commands=[add_deps(rule, label)])
        log.info('Not provided by an existing rule')

        # Generated code, there is a 1:1 mapping of generator rule name to Java package
        name = java_class.package.replace('.', '_')
        generated = self.workspace.find_rule_of_kind(name, C.GENERATED_RULE_KIND)
        if generated is not None:
            return Fix(java_class=java_class, strategy=Strategy.GENERATED_RULE, commands=[add_deps(rule, generated)])
        log.info(f'Not provided by {C.GENERATED_RULE_KIND} rule')

        dependency = self.catalog.find_class(java_class)
        if dependency is None:
            log.info(f'Not provided by internal (source) or external ({C.EXTERNAL_DEPENDENCY_KIND}) dependency')
            return None

        log.info(f'Missing class {java_class.name} provided by {dependency.name}')

        # Treat external dependencies the same as internal ones
        name = dependency.name.removeprefix(C.EXTERNAL_PREFIX)
        if self.workspace.rule_exists(name):
            commands = [add_deps(rule, name)]
        else:
            # The new rule gets attached by the next run
            commands = new_java_library(dependency)

        return Fix(java_class=java_class, strategy=Strategy.CATALOG, commands=commands)


def resolve(problems: BuildProblems, catalog: Catalog, workspace: Workspace) -> List[str]:
    return Resolver(catalog, workspace).resolve(problems).commands
