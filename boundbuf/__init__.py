# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 3, 2019
# Last Update: Time-stamp: <2019-10-14 11:05:20 liux>
###############################################################

"""Boundbuf: producers and consumers on a bounded circular buffer."""

import sys

if sys.version_info[:2] < (3, 5):
    raise ImportError("Boundbuf requires Python 3.5 and above (%d.%d detected)." %
                      sys.version_info[:2])

from .errors import *
from .config import *
from .semaphore import *
from .semset import *
from .queue import *
from .job import *
from .stats import *
from .context import *
from .worker import *
from .coordinator import *

__version__ = '1.0.0'
