from dataclasses import dataclass
import enum
import math

from fbode.constants import BLOCK_SIZE, COUPLING_DIAGONAL, COUPLING_PAIRED
from fbode.errors import MalformedMatrixError


class StructuralCase(enum.Enum):
    """Recognized layouts of the coefficient matrix"""

    COMPACT_DIAGONAL = "compact_diagonal"
    GENERAL_DIAGONAL = "general_diagonal"
    COMPACT_SKEW = "compact_skew"
    GENERAL_SKEW = "general_skew"

    @property
    def paired(self):
        """Whether a unit of work advances a pair of elements."""
        return self in (StructuralCase.COMPACT_SKEW, StructuralCase.GENERAL_SKEW)


@dataclass
class Layout:
    """How one solve maps onto units of parallel work.

    Attributes
      case: structural case selected from the matrix shape
      width: number of state elements
      work_size: number of units of work (elements, or pairs)
      block_size: threads per block
    """

    case: StructuralCase
    width: int
    work_size: int
    block_size: int = BLOCK_SIZE

    @property
    def grid_size(self):
        """Number of blocks needed to cover every unit of work."""
        return int(math.ceil(self.work_size / self.block_size))

    @property
    def half(self):
        """Offset between the two elements of a pair."""
        return self.width // 2


def classify_layout(shape, width, coupling=COUPLING_PAIRED, block_size=BLOCK_SIZE):
    """Select the structural case for a coefficient matrix.

    Parameters
    ----------
    shape: tuple of ints
      Shape of the coefficient matrix
    width: int
      Number of state elements
    coupling: str
      For a full (width x width) matrix, "paired" couples element i with
      element i + width/2, and "diagonal" uses only the diagonal.
    block_size: int
      Threads per block

    Returns
    -------
    instance of `Layout`

    Raises
    ------
    MalformedMatrixError
      Matrix is not square, its size is not 1, 2 or `width`, or a paired
      case is requested for an odd number of elements.
    """
    if coupling not in (COUPLING_PAIRED, COUPLING_DIAGONAL):
        raise ValueError(
            f"coupling must be {COUPLING_PAIRED!r} or {COUPLING_DIAGONAL!r}, got {coupling!r}"
        )

    if len(shape) != 2 or shape[0] != shape[1]:
        raise MalformedMatrixError(f"Coefficient matrix must be square, got shape {tuple(shape)}")

    size = shape[0]

    if size == 1:
        case = StructuralCase.COMPACT_DIAGONAL
    elif size == 2:
        case = StructuralCase.COMPACT_SKEW
    elif size == width and coupling == COUPLING_DIAGONAL:
        case = StructuralCase.GENERAL_DIAGONAL
    elif size == width:
        case = StructuralCase.GENERAL_SKEW
    else:
        raise MalformedMatrixError(
            f"Coefficient matrix of shape {tuple(shape)} does not fit {width} state "
            f"elements (expected 1x1, 2x2 or {width}x{width})"
        )

    if case.paired:
        if width % 2 != 0:
            raise MalformedMatrixError(
                f"Paired coupling needs an even number of state elements, got {width}"
            )
        work_size = width // 2
    else:
        work_size = width

    return Layout(case=case, width=width, work_size=work_size, block_size=block_size)
