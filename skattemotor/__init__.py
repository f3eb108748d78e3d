"""
Skattemotor - Moms, bokslut och inkomstdeklaration från huvudboken
"""
__version__ = "1.0.0"
