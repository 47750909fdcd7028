'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>

Lockstep implementation
======================

Lockstep parameterised class decorator

* allows use of square brackets for parameterisation of classes, eg Domain['System', 10000]
* binds the parameters against the factory signature, so defaults are part of the identity
* caches classes so that when created from equivalent parameters, there is only one class
  and it can be compared with "is"
'''

import inspect


class Generic:
    def __init__(self, class_factory):
        self.class_factory = class_factory
        self.factory_signature = inspect.signature(class_factory)
        self.class_cache = dict()
        self.__doc__ = class_factory.__doc__
        self.__name__ = class_factory.__name__

    def __getitem__(self, index):
        if index is Ellipsis:
            args = tuple()
            kwargs = {}
        elif isinstance(index, tuple):
            args = index
            kwargs = {}
        elif type(index) is dict:
            args = tuple()
            kwargs = index
        else:
            args = (index,)
            kwargs = {}
        return self.lookup(args, kwargs)

    def __call__(self, *args, **kwargs):
        'round-bracket form, same cache'
        return self.lookup(args, kwargs)

    def lookup(self, args, kwargs):
        bound_args = self.factory_signature.bind(*args, **kwargs)
        bound_args.apply_defaults()
        class_cache_key = tuple(bound_args.arguments.items())

        try:
            cached_class = self.class_cache.get(class_cache_key, None)
        except TypeError:
            # unhashable parameters cannot be cached
            return self.class_factory(*bound_args.args, **bound_args.kwargs)

        if cached_class is None:
            cached_class = self.class_factory(*bound_args.args, **bound_args.kwargs)
            self.class_cache[class_cache_key] = cached_class

        return cached_class

    def __repr__(self):
        return f'<Generic {self.__name__}>'
