# autoflake: skip_file

# modules
from . import constraints as constraints
from . import filters as filters

# bit vectors and linear algebra
from ._bitvec import BitVector as BitVector
from .linalg import Basis as Basis
from .linalg import Visit as Visit
from .linalg import extract as extract
from .linalg import rank as rank
from .linalg import reduce_in_place as reduce_in_place
from .linalg import solve_rows as solve_rows

# constraint generators
from .constraints import alphabetic_constraint as alphabetic_constraint
from .constraints import combine as combine
from .constraints import fixed_byte as fixed_byte
from .constraints import fixed_bytes as fixed_bytes
from .constraints import hash_equals as hash_equals
from .constraints import range_constraint as range_constraint
from .constraints import suffix as suffix

# filters
from .filters import CandidateFilter as CandidateFilter
from .filters import Charset as Charset
from .filters import WordMatcher as WordMatcher
from .filters import get_charset as get_charset

# high level
from .search import LineSink as LineSink
from .search import Problem as Problem
from .search import SearchResult as SearchResult
from .search import search as search
from .search import solve as solve

# errors
from ._diagnostic import ShapeError as ShapeError

# misc
from ._sta_rev import sta_rev as sta_rev
from ._utils import load_words as load_words
from ._utils import sta_hash as sta_hash
from .config import print_ as print_
