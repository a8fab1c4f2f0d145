"""Prompt templates offered to MCP clients alongside the tools."""

from __future__ import annotations


def summarize_library_docs(library_name: str, documentation: str, error_status: str = "") -> str:
    """Ask the model to summarise compiled documentation for a library."""
    if error_status:
        return (
            f"I was trying to learn about the {library_name} library, but there was an error "
            f"fetching the documentation: {error_status}. Can you tell me what you know about "
            "it based on your training?"
        )
    return (
        f"I need to understand the {library_name} library. Here's the raw documentation:\n\n"
        f"{documentation}\n\n"
        "Please summarize this documentation for me with:\n"
        "1. A brief overview of what the library does\n"
        "2. Key features and capabilities\n"
        "3. Basic installation and usage examples\n"
        "4. Any important API methods or patterns\n"
        "5. Common use cases\n\n"
        "Focus on the most important information that would help me understand and start "
        "using this library."
    )


def explain_dependency_error(package_name: str, documentation: str, error_status: str = "") -> str:
    """Ask the model to explain a dependency error using the package docs."""
    if error_status:
        return (
            f"I'm getting a dependency error for the '{package_name}' package. There was an "
            f"issue fetching the detailed documentation: {error_status}. Can you explain what "
            "this package does, how to install it properly, and why I might be seeing an error?"
        )
    return (
        f"I'm getting a dependency error for the '{package_name}' package. "
        f"Here's the documentation:\n\n{documentation}\n\n"
        "Based on this information, please:\n"
        "1. Explain what this package does\n"
        "2. Show me how to properly install it\n"
        "3. Tell me common reasons why I might be getting a dependency error\n"
        "4. Provide a simple example of how to use it correctly"
    )
