# -*- coding: utf-8 -*-
"""Utility helpers for errorthrottle.

Copyright 2025
SPDX-License-Identifier: Apache-2.0
"""
