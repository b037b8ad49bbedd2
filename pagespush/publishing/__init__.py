"""
publishing/ — Todo lo relacionado con publicar el build.

Módulos:
- publisher.py → Publisher: precondiciones y flujo completo
- git_ops.py   → Operaciones Git (branch, add, commit, push)
- mirror.py    → Snapshot de dist/ y copia espejo al working tree
- errors.py    → Taxonomía de errores
"""
