""" ### The pixel buffer type. ### """

from .buffer import *
