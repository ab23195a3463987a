# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Virtual-user scheduling engine.

Import from the submodules directly (vuperf.engine.controller and so on);
this package keeps no re-exports because the recorders depend on
vuperf.engine.context.
"""
