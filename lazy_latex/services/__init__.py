"""上文窗口与额外指令来源"""
