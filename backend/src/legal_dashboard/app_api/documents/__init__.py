"""Document upload, text extraction, analysis and chat for file numbers"""
