"""
re-pair paired-end reads from separate fasta/q files and convert between separate and interleaved files
"""
__version__ = '0.14.0'
