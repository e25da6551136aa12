"""Raw grammar tree handed over by the header parser.

Nothing here parses C. These classes only describe the shape of the
already-parsed declarations so the IR layer has something concrete to
consume, plus a loader for parsed-header dumps written to disk.
"""
