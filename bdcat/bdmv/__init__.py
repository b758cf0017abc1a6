"""Binary decoders for BDMV on-disc structures."""
