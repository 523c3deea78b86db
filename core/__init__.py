# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Customer Profiles resource models, translation and lifecycle handlers.
"""
