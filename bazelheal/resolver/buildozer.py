from typing import List

from ..common.config import C
from ..java.model import Dependency


def add_deps(rule: str, *deps: str) -> str:
    return f"{C.BUILDOZER} 'add deps {' '.join(deps)}' {rule}"


def new_java_library(dependency: Dependency) -> List[str]:
    return [
        f"{C.BUILDOZER} 'new java_library {dependency.name}' {C.ROOT_PACKAGE_TARGET}",
        f"""{C.BUILDOZER} 'set srcs glob(["{dependency.external_reference}**/*.java"])' {dependency.name}""",
    ]
