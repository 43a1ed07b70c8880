#!/usr/bin/env python3

#============================================

class ShellSceneError(RuntimeError):
	pass

#============================================

class ScriptSyntaxError(ShellSceneError):
	"""
	Raised for a script line that matches no grammar rule.
	"""
	def __init__(self, line: str, line_number: int = None):
		self.line = line
		self.line_number = line_number
		message = f"SceneScript syntax error: \"{line}\""
		if line_number is not None:
			message = f"SceneScript syntax error on line {line_number}: \"{line}\""
		super().__init__(message)

#============================================

class SemanticError(ShellSceneError):
	pass

#============================================

class AssetError(ShellSceneError):
	pass
