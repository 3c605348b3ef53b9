# -*- coding: utf-8 -*-
"""
All-NBA Voting Share Model

Offline batch pipeline that turns historical player game logs and award-voting
records into a two-stage model of All-NBA voting share, and scores teams on
expected share and playoff experience.
"""

__version__ = "1.0.0"
