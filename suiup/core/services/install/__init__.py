"""
Install service — layered like the rest of the core:

    domain/         L1  pure: validation, spec parsing, size formatting
    execution/      L4  disk and network: cache sweeps, backends, registry
    orchestration/  L5  install dispatch
"""
