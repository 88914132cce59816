"""Local REST facade over the RAGFlow document and RAG platform"""

__version__ = "1.0.0"
