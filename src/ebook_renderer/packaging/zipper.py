"""
Préparation et compression des archives EPUB / ODT.

Le Zipper possède un répertoire de travail temporaire, privé à une passe de
rendu. Les fichiers y sont écrits un par un, puis le répertoire est replié
en une seule archive zip. L'ordre d'écriture est conservé dans l'archive.

Contraintes des deux formats :
- la première entrée est ``mimetype``, stockée sans compression
- les autres entrées sont compressées (deflate)
"""

import shutil
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Optional

from ..exceptions import PackagingError
from ..logger import get_logger

logger = get_logger(__name__)

MIMETYPE_ENTRY = "mimetype"


class Zipper:
    """
    Répertoire de travail temporaire + génération de l'archive finale.

    Utilisable comme gestionnaire de contexte : le répertoire de travail
    est supprimé à la sortie.

    Attributes:
        path: Répertoire de travail
        entries: Entrées de l'archive dans l'ordre d'écriture {nom: compressée}

    Example:
        >>> with Zipper() as zipper:
        ...     zipper.write("mimetype", b"application/epub+zip", compress=False)
        ...     zipper.write("content.opf", opf_bytes)
        ...     zipper.generate_epub(Path("livre.epub"))
    """

    def __init__(self, temp_dir: Optional[str | Path] = None):
        try:
            if temp_dir is not None:
                Path(temp_dir).mkdir(parents=True, exist_ok=True)
            self.path = Path(tempfile.mkdtemp(prefix="ebook_renderer_", dir=temp_dir))
        except OSError as err:
            raise PackagingError(
                f"Impossible de créer le répertoire de travail dans '{temp_dir}': {err}"
            ) from err
        self.entries: dict[str, bool] = {}
        logger.debug(f"Répertoire de travail : {self.path}")

    def __enter__(self) -> "Zipper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Supprime le répertoire de travail."""
        shutil.rmtree(self.path, ignore_errors=True)

    def _resolve(self, name: str) -> Path:
        """Chemin réel d'une entrée, en refusant toute sortie du répertoire de travail."""
        relative = PurePosixPath(name)
        if not name or relative.is_absolute() or ".." in relative.parts:
            raise PackagingError(f"Nom d'entrée invalide dans l'archive : '{name}'")
        return self.path.joinpath(*relative.parts)

    # -----------------------------------
    # 🔹 Écriture dans le répertoire de travail
    # -----------------------------------
    def write(self, name: str, content: bytes, compress: bool = True) -> None:
        """
        Écrit un fichier dans le répertoire de travail.

        Args:
            name: Chemin de l'entrée dans l'archive (séparateur "/")
            content: Contenu binaire
            compress: False pour stocker l'entrée sans compression ; n'est
                accepté que pour la toute première écriture (``mimetype``)

        Raises:
            PackagingError: Si l'entrée non compressée n'est pas la première,
                si le nom sort du répertoire de travail, ou en cas d'erreur d'E/S
        """
        if not compress and self.entries:
            raise PackagingError(
                f"L'entrée non compressée '{name}' doit être écrite avant toute autre"
            )

        target = self._resolve(name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as err:
            raise PackagingError(f"Écriture de '{name}' impossible : {err}") from err

        # Une réécriture garde la position d'origine dans l'archive
        self.entries[name] = self.entries.get(name, compress)

    def unzip(self, name: str) -> None:
        """
        Décompresse sur place une archive déjà écrite dans le répertoire de travail.

        L'archive elle-même est retirée ; ses entrées sont enregistrées dans
        leur ordre d'origine, avec leur mode de compression d'origine.

        Raises:
            PackagingError: Si l'archive est absente, corrompue ou contient
                des chemins hors du répertoire de travail
        """
        archive = self._resolve(name)
        try:
            with zipfile.ZipFile(archive) as zf:
                infos = [info for info in zf.infolist() if not info.is_dir()]
                for info in infos:
                    self._resolve(info.filename)
                zf.extractall(self.path)
        except (OSError, zipfile.BadZipFile) as err:
            raise PackagingError(f"Décompression de '{name}' impossible : {err}") from err

        archive.unlink()
        self.entries.pop(name, None)
        for info in infos:
            self.entries[info.filename] = info.compress_type != zipfile.ZIP_STORED

    # -----------------------------------
    # 🔹 Génération de l'archive
    # -----------------------------------
    def _check_mimetype_first(self, kind: str) -> None:
        first = next(iter(self.entries.items()), None)
        if first != (MIMETYPE_ENTRY, False):
            raise PackagingError(
                f"{kind} : la première entrée doit être '{MIMETYPE_ENTRY}' non compressée"
            )

    def generate(self, output: str | Path) -> str:
        """
        Replie le répertoire de travail en une archive zip.

        L'archive est d'abord écrite dans un fichier ``.part`` puis renommée :
        le fichier de sortie n'existe que si la génération a réussi.

        Returns:
            Message décrivant l'archive produite (chemin et taille)

        Raises:
            PackagingError: En cas d'erreur d'écriture
        """
        output = Path(output)
        partial = output.with_name(output.name + ".part")
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(partial, "w") as zf:
                for name, compress in self.entries.items():
                    zf.write(
                        self._resolve(name),
                        arcname=name,
                        compress_type=zipfile.ZIP_DEFLATED if compress else zipfile.ZIP_STORED,
                    )
            partial.replace(output)
        except OSError as err:
            partial.unlink(missing_ok=True)
            raise PackagingError(f"Génération de '{output}' impossible : {err}") from err

        size = output.stat().st_size
        logger.info(f"Archive générée : {output} ({len(self.entries)} entrées, {size} octets)")
        return f"{output} ({size} octets)"

    def generate_epub(self, output: str | Path) -> str:
        """Génère un EPUB (vérifie que ``mimetype`` est bien la première entrée)."""
        self._check_mimetype_first("EPUB")
        return self.generate(output)

    def generate_odt(self, output: str | Path) -> str:
        """Génère un ODT (vérifie que ``mimetype`` est bien la première entrée)."""
        self._check_mimetype_first("ODT")
        return self.generate(output)
