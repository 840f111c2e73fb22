"""EVM log handling: raw log normalization and ABI decoding."""
