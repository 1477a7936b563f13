""" ### Utility functions shared by the image operations. ### """

from .utils_base import *
from .utils_errors import *
from .utils_parallel import *
