"""
Change-ingestion pipeline

filters → classifier → router → repository, driven one event at a time by
processor.py.
"""
