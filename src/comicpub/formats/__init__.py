# ABOUTME: Format readers for inspecting finished packages.
