"""
Bundled feature modules.
Each module exposes a factory taking a ModuleContext and returning a
ModuleDescriptor; list them in PORTAL_MODULES to load them.
"""
