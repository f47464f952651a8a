"""
Infrastructure: configuration, logging, errors, artifact I/O and the Python
source collaborators.
"""
