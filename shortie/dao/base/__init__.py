from shortie.dao.base.token_base_dao import TokenBaseDAO


__all__ = ['TokenBaseDAO']
