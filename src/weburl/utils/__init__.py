"""src/weburl/utils/__init__.py"""
