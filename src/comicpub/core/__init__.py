# ABOUTME: Core pipelines: directory scanning and whole-book builds.
