from typing import Optional, List

from pydantic import BaseModel, field_validator


def strip_last(name: str) -> str:
    """Removes the last dot separated segment: a.b.c.d => a.b.c"""
    if '.' not in name:
        raise ValueError(f'Name has no package part: {name!r}')
    return name.rsplit('.', 1)[0]


class JavaClass(BaseModel):
    """Fully qualified Java class, the build log only gives us the name"""

    module: Optional[str] = None
    """Maven: module path relative to the workspace"""

    layout: Optional[str] = None
    """Maven: source layout inside the module, like src/main/java"""

    name: str
    """Fully qualified class name, like org.company.framework.A"""

    @field_validator('name')
    @classmethod
    def name_must_not_be_empty(cls, value: str) -> str:
        if not value:
            raise ValueError('Empty class name')
        return value

    @classmethod
    def new(cls, name: str) -> 'JavaClass':
        return cls(name=name)

    @property
    def package(self) -> str:
        return strip_last(self.name)


class Dependency(BaseModel):
    """Named bundle of classes which can be attached to a rule"""

    name: str
    """Rule name derived from the module path or the external dependency label"""

    external_reference: str
    """Source path into the module (ui/web/src/main/java/) or path of the jar"""

    resources: List[str] = []
    """Fully qualified names of the classes provided"""

    def provides(self, java_class: JavaClass) -> bool:
        return java_class.name in self.resources


class BuildProblems(BaseModel):
    """What went wrong in a single build, as scanned from its log"""

    bazel_rule: str = ''
    """Label of the rule being built, empty until the log names one"""

    missing_class: List[JavaClass] = []
    """Classes the compiler could not find, in order of appearance, duplicates included"""

    fix_command: Optional[str] = None
    """Ready-made buildozer command suggested by bazel itself"""

    def add(self, name: str):
        self.missing_class.append(JavaClass.new(name))
