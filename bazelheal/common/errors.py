class HealError(RuntimeError):
    """Broken assumption about the build log or the workspace, the run cannot continue"""


class MalformedLogError(HealError):
    """A trigger line of the build log does not have the expected shape"""


class ArchiveError(HealError):
    """A jar file cannot be read or cannot be picked unambiguously"""


class QueryError(HealError):
    """A workspace query failed for a reason other than the target not being found"""


class CacheError(HealError):
    """The class cache cannot be read back"""
