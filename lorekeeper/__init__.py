"""
LoreKeeper

世界观知识库的时间线（Continuity）、事件正史（Event）与漂移（Drift）对账服务
"""

__version__ = "0.1.0"
