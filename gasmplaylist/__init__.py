"""
gasmplaylist - Soundgasm 播放列表机器人与页面解析服务

解析服务把 Soundgasm 页面链接解析为音频直链；
播放列表机器人在 Discord 语音频道中按顺序播放这些音频。
"""

__version__ = "1.0.0"
