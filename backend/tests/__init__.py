# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Suite for the Nodeflow Backend

Structure:
- unit/: Unit tests for evaluators, stores, sink and capabilities
- test_workflow_engine.py: Graph execution
- test_api.py: HTTP routes end-to-end with TestClient
"""
