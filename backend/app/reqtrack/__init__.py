"""ReqTrack - 需求与测试追踪服务"""

__version__ = "0.1.0"
