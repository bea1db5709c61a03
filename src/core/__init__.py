"""Core domain package for querybook.

Core contains the schema, the staged query handles and the list/create
handlers without any SQLite or UI code, keeping the query logic portable.
"""
