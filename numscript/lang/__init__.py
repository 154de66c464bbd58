"""The numscript language: lexical analysis, parsing, evaluation, and the session/shell layer around them."""
