"""
TDS Converter

Converts caret-delimited text (TDS) files to .xlsx workbooks over HTTP.

Layers:
    - domain: parsing rules, value objects, exceptions
    - application: conversion use cases and ports
    - infrastructure: openpyxl encoder, artifact stores
    - api: FastAPI application
"""

__version__ = "0.1.0"
