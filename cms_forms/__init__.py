# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
CMS form entries service.

Public form submission, form entry management and the named fixture loader.
"""
