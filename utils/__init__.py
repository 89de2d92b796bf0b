"""
工具包：AHP 计算引擎与业务服务
"""
