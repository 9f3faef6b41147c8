"""
CogniTutor - AI Module
Tier classification, prompt composition, question generation, scoring and
document extraction. Import components from their own modules.
"""
