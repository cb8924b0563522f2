"""
Robot program generation module.

Converts a validated trajectory aggregate into controller program text.
"""

from robot_post.dialect.generator import (
    CodeGenerationError,
    CodeGenerator,
    generate_program,
)

__all__ = ["CodeGenerationError", "CodeGenerator", "generate_program"]
