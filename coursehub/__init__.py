"""
CourseHub application package.

Course catalogue, enrollment, lecture progress and educator dashboards on
top of the generic common/ library.
"""
