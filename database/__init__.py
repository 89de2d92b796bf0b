"""
数据库包：模型、Schema、数据访问与会话管理
"""
