# marketplace/api/__init__.py
