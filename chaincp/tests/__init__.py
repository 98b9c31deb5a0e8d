"""
Test suite for the checkpoint builder.

Focus areas:
- Selection policy (interval + minimum age)
- File format round trip and digest determinism
- Corruption rejection
- Time-based lookup
- Build flow self-check
"""
