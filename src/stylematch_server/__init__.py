"""
stylematch-server: retrieval-augmented style matching and Linguistic DNA.
"""
