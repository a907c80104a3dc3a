from typing import List, Optional


class Workspace:
    """Queries against a Bazel workspace needed to resolve missing classes

    Implementations raise QueryError if a query fails unexpectedly.
    Targets which do not exist are reported as None or False instead.
    """

    def output_base(self) -> str:
        """Root of the directory tree bazel materializes external repositories into"""
        raise NotImplementedError()

    def list_external_dependencies(self) -> List[str]:
        """Labels of all declared external dependencies, like //external:junit"""
        raise NotImplementedError()

    def rule_exists(self, rule: str) -> bool:
        raise NotImplementedError()

    def find_rule_of_kind(self, name: str, kind: str) -> Optional[str]:
        """Returns the name if a rule of that name and kind exists in the root package"""
        raise NotImplementedError()

    def find_rule_with_sources(self, pattern: str) -> Optional[str]:
        """Returns the label of the only rule with a source matching the pattern"""
        raise NotImplementedError()
