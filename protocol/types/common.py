# MIT License
# Copyright (c) 2025 Hashborn

from enum import Enum

class RPCCall(str, Enum):
    DOWNLOAD = "download"
    FORM_CONTRACT = "formcontract"
    RENEW = "renew"
    REVISE = "revise"
    SETTINGS = "settings"
    ERROR = "error"             # Call failed mid-protocol
    UNRECOGNIZED = "unrecognized"  # Unknown RPC identifier

class ProtocolError(Exception):
    pass

class ValidationError(ProtocolError):
    pass

class ConversionOverflowError(ProtocolError, OverflowError):
    pass

class NegativeCurrencyError(ProtocolError, ValueError):
    pass

class BroadcastError(ProtocolError):
    pass
