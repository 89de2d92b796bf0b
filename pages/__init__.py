"""
Dash 页面模块（导入时注册回调）
"""
