# motorph/attendance/__init__.py
