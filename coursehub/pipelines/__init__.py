"""
CourseHub Pipelines.

Business logic orchestration functions.
"""

from coursehub.pipelines.enrollment import *
from coursehub.pipelines.progress import *
from coursehub.pipelines.rating import *
from coursehub.pipelines.educator import *
from coursehub.pipelines.provisioning import *
