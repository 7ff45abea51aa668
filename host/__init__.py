# MIT License
# Copyright (c) 2025 Hashborn

"""
Storage host: economic state, settings, persistence, RPC surface.
"""
