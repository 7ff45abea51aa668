# MIT License
# Copyright (c) 2025 Hashborn

"""
Protocol constants, ledger value types and price unit conversion.
"""
