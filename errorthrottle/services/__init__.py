# -*- coding: utf-8 -*-
"""Services Package.

Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Exposes the error throttling services:
- Fingerprinting
- Rate limiting
"""
