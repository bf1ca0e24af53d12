"""Exception types raised while building and rendering family graphs."""


class FamilyTreeError(Exception):
    """Base class for all family graph errors."""


class InputValidationError(FamilyTreeError, ValueError):
    """The person snapshot is malformed and no layout was attempted."""


class CyclicRelationshipError(FamilyTreeError):
    """The parent/spouse links loop back on themselves."""

    def __init__(self, chain: list[int]):
        self.chain = chain
        path = " -> ".join(str(pid) for pid in chain)
        super().__init__(
            f"Cyclic relationship detected between persons: {path}. "
            "Check the parentIds and spouseId fields of these records."
        )


class RenderBackendError(FamilyTreeError):
    """The drawing backend failed.

    `layout_unavailable` is True when the backend could not run its preset
    positioning mode at all (e.g. the Graphviz program is not installed), which
    is the only case the pipeline retries with the fallback ranking.
    """

    def __init__(self, message: str, layout_unavailable: bool = False):
        super().__init__(message)
        self.layout_unavailable = layout_unavailable
