from .datatypes import LoadError
from .datatypes import Sequence

from .suffix_array import compare_suffixes
from .suffix_array import create_suffix_array

from .suffix_index import SuffixIndex
from .suffix_index import naive_search

from .utils import AttributeDict
from .utils import setup_logger
from .utils import str2bool

__version__ = "0.1.0"
